"""
Configuration constants for the passvault credential vault.
"""

import os
from typing import Optional

# Application Metadata
APP_VERSION = "1.0"  # Use: Current version of the application. Type: str. Range: Semantic versioning string (e.g., "1.0.0")
APP_NAME = "passvault"  # Use: Name of the application, shown by --version and in help text. Type: str. Range: Any valid string.
APP_DESCRIPTION = "Local single-user credential vault gated by a master key."  # Use: Description shown in the command-line help. Type: str. Range: Any valid string.

# Password Policy Settings
PASSWORD_MIN_LENGTH = 12  # Use: Minimum required length for the master key and every stored password. Type: int. Range: Positive integer.
SPECIAL_CHARACTERS = "!@#$%^&*()-=_+"  # Use: Characters that satisfy the special-character rule of the password policy. Type: str. Range: Fixed set, do not extend without migrating existing vaults.
POLICY_LABEL_KEY = "key"  # Use: Label used in policy messages when validating the master key. Type: str. Range: Any short noun.
POLICY_LABEL_PASSWORD = "password"  # Use: Label used in policy messages when validating a stored secret. Type: str. Range: Any short noun.
POLICY_LABEL_RESOURCE = "resource"  # Use: Label used in field messages when validating a resource name. Type: str. Range: Any short noun.

# Vault File Format
FIELD_DELIMITER = " => "  # Use: Separator between resource and secret on each vault line. Type: str. Range: Must not appear inside resource or secret values.

# File and Directory Names
CONFIG_DIR_NAME = ".passvault"  # Use: Name of the hidden directory within the user's home directory holding the key and vault files. Type: str. Range: Any valid directory name.
CONFIG_ROOT_ENV = "PASSVAULT_HOME"  # Use: Environment variable that overrides the configuration root. Type: str. Range: Any valid environment variable name.
KEY_FILE = "master.key"  # Use: Filename for the stored master key. Type: str. Range: Any valid filename.
VAULT_FILE = "vault.txt"  # Use: Filename for the vault entries. Type: str. Range: Any valid filename.
TEMP_SUFFIX = ".tmp"  # Use: Suffix of the sibling file written before atomically replacing the vault. Type: str. Range: Any valid filename suffix.
DIR_MODE = 0o700  # Use: Permission bits for the configuration root. Type: int. Range: Owner-only modes.
FILE_MODE = 0o600  # Use: Permission bits for the key and vault files. Type: int. Range: Owner-only modes.

# Prompts
PROMPT_NEW_KEY = "Define a master key: "  # Use: Prompt shown when no master key exists yet. Type: str. Range: Any descriptive string.
PROMPT_KEY = "Master key: "  # Use: Prompt shown when unlocking an existing vault. Type: str. Range: Any descriptive string.
PROMPT_OVERWRITE = "Overwrite? [y/N]: "  # Use: Confirmation prompt for replacing an existing entry. Type: str. Range: Any descriptive string.
AFFIRMATIVE_ANSWERS = ("y", "yes")  # Use: Answers (lowercased, stripped) accepted as confirmation of an overwrite. Anything else cancels. Type: tuple[str]. Range: Non-empty tuple of strings.
PASSWORD_HIDDEN_TEXT = "••••••••"  # Use: Placeholder displayed instead of a secret in confirmation prompts. Type: str. Range: Any string.

# Exit Codes
EXIT_OK = 0  # Use: Successful run, including a cancelled overwrite. Type: int. Range: 0
EXIT_FAILURE = 1  # Use: Fatal error (policy violation, key rejected, collision, corrupt vault, I/O). Type: int. Range: Non-zero int.
EXIT_USAGE = 2  # Use: Invalid command-line usage, as reported by argparse. Type: int. Range: 2
EXIT_NOT_FOUND = 3  # Use: Lookup miss, distinguishable from failure. Type: int. Range: Non-zero int distinct from the others.

# Logging
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'  # Use: Format for log records. Type: str. Range: Valid logging format string.


def get_config_root(override: Optional[str] = None) -> str:
    """
    Resolve the configuration root holding the key and vault files.
    An explicit override wins, then the PASSVAULT_HOME environment variable,
    then ~/.passvault.
    """
    if override:
        return os.path.abspath(os.path.expanduser(override))
    env_root = os.environ.get(CONFIG_ROOT_ENV)
    if env_root:
        return os.path.abspath(os.path.expanduser(env_root))
    return os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME)
