"""
cubectl Constants

Centralized constants for remote layout, host sources and tool defaults.
"""

# Settings file
CONFIG_PATH_ENV = "CUBECTL_CONFIG"
DEFAULT_CONFIG_PATH = "~/.cubectl.yml"

# Remote layout
DEFAULT_REMOTE_DIR = "~/cubectl"
REMOTE_LIBRARY_NAME = "cube_api.sh"
COMPOSITE_SCRIPT_NAME = "cube_exec.sh"
INITIAL_DIRECTORY_VAR = "cube_initial_directory"

# Local defaults
DEFAULT_LOG_DIR = "~/.cubectl/logs"
DEFAULT_EDITOR = "vi"
DEFAULT_GPG_BINARY = "gpg"
DEFAULT_COMPLETION_DIR = "/etc/bash_completion.d"
COMPLETION_FILE_NAME = "cubectl"

# File naming
CUBE_SCRIPT_SUFFIX = ".sh"
ENCRYPTED_SUFFIX = ".enc"
DECRYPTED_SUFFIX = ".dec"

# Host resolution
HOST_WILDCARD = "*"
SSH_CONFIG_FILES = [
    "/etc/ssh_config",
    "/etc/ssh/ssh_config",
    "~/.ssh/config",
]
SSH_KNOWN_HOSTS_FILES = [
    "/etc/ssh_known_hosts",
    "/etc/ssh/ssh_known_hosts",
    "~/.ssh/known_hosts",
]
HOSTS_FILE = "/etc/hosts"

# Sub-commands available when no hosts are given
SUB_COMMANDS = ["show", "edit"]

# Transfer: no -a so ownership is picked up from the connecting user
RSYNC_BASE_OPTIONS = ["-rlpt"]

# Re-encryption parameters (AES256, iterated+salted S2K with SHA512)
GPG_SYMMETRIC_OPTIONS = [
    "--s2k-mode",
    "3",
    "--s2k-count",
    "65536",
    "--cipher-algo",
    "AES256",
    "--s2k-digest-algo",
    "SHA512",
]

# File Permissions
COMPOSITE_SCRIPT_PERMISSIONS = 0o755
COMPLETION_FILE_PERMISSIONS = 0o755

# Log Configuration
LOG_DATE_FORMAT = "%Y-%m-%d"
LOG_TIME_FORMAT = "%H-%M-%S"
