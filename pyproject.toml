[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pyftpserve"
version = "0.1.0"
description = "A small FTP server that serves one directory tree to an anonymous user, with passive and active data channels"
requires-python = ">=3.10"
dependencies = []
keywords = ["ftp", "server", "anonymous", "file-transfer"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: File Transfer Protocol (FTP)",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
pyftpserve = "pyftpserve.server:main"

[tool.hatch.build.targets.wheel]
packages = ["pyftpserve"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
