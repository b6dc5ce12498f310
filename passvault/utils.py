import platform
import os
import logging

from . import config

logger = logging.getLogger(__name__)

if platform.system() == "Windows":
    try:
        import win32security
        import win32api
        import win32con
        import win32file
        WINDOWS_SECURITY_AVAILABLE = True
    except ImportError:
        logger.warning("pywin32 not fully installed, cannot set Windows file permissions securely.")
        WINDOWS_SECURITY_AVAILABLE = False
else:
    WINDOWS_SECURITY_AVAILABLE = False


def _set_windows_owner_only(path: str) -> bool:
    """
    Replaces the DACL of a file or directory on Windows so that only the
    current user has access.
    """
    if not WINDOWS_SECURITY_AVAILABLE:
        logger.warning(f"Skipping Windows permission setting for {path}: pywin32 not available.")
        return False

    try:
        current_user_name = win32api.GetUserName()
        current_user_sid, _, _ = win32security.LookupAccountName(None, current_user_name)

        dacl = win32security.ACL()
        dacl.AddAccessAllowedAce(
            win32security.ACL_REVISION,
            win32con.GENERIC_READ | win32con.GENERIC_WRITE | win32con.GENERIC_EXECUTE,
            current_user_sid
        )

        # Directories need FILE_FLAG_BACKUP_SEMANTICS to be opened as a handle
        flags = win32con.FILE_ATTRIBUTE_NORMAL
        if os.path.isdir(path):
            flags = win32file.FILE_FLAG_BACKUP_SEMANTICS

        handle = win32file.CreateFile(
            path,
            win32con.WRITE_DAC,
            win32file.FILE_SHARE_READ | win32file.FILE_SHARE_WRITE | win32file.FILE_SHARE_DELETE,
            None,
            win32con.OPEN_EXISTING,
            flags,
            None
        )

        try:
            win32security.SetSecurityInfo(
                handle,
                win32security.SE_FILE_OBJECT,
                win32security.DACL_SECURITY_INFORMATION | win32security.PROTECTED_DACL_SECURITY_INFORMATION,
                None,
                None,
                dacl,
                None
            )
            logger.debug(f"Set owner-only permissions for {path} on Windows.")
        finally:
            win32file.CloseHandle(handle)
    except win32api.error as e:
        logger.error(f"Failed to set Windows permissions for {path}: {e}")
        return False
    return True


def set_owner_only(path: str, mode: int) -> bool:
    """
    Restrict a path to its owner. On POSIX this applies `mode` (700 for the
    root directory, 600 for files); on Windows it replaces the ACL.
    Returns False if the permissions could not be hardened.
    """
    if platform.system() == 'Windows':
        return _set_windows_owner_only(path)
    os.chmod(path, mode)
    return True


def write_owner_only(path: str, content: str) -> None:
    """
    Write text to `path` through a sibling temp file, restrict it to the
    owner, then move it into place so readers never see a partial file.
    """
    tmp_path = path + config.TEMP_SUFFIX
    try:
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, config.FILE_MODE)
        with os.fdopen(fd, 'w', encoding='utf-8', newline='\n') as f:
            f.write(content)
        if not set_owner_only(tmp_path, config.FILE_MODE):
            logger.warning(f"Failed to set secure file permissions for {path}.")
        os.replace(tmp_path, path)
    except OSError as e:
        logger.error(f"Error writing {path}: {e}")
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def ensure_config_root(root: str, vault_path: str) -> None:
    """
    Create the configuration root and an empty vault file if they are
    missing. Safe to call on every invocation.
    """
    if not os.path.isdir(root):
        logger.debug(f"Creating configuration root {root}")
        os.makedirs(root, mode=config.DIR_MODE, exist_ok=True)
        set_owner_only(root, config.DIR_MODE)

    if not os.path.exists(vault_path):
        logger.debug(f"Creating empty vault file {vault_path}")
        write_owner_only(vault_path, "")
