"""Find spec files under a directory"""

import logging
import os

from cypar.errors import DiscoveryError


logger = logging.getLogger(__name__)


def _walk_spec_files(directory: str, extension: str) -> list[str]:
    if not os.path.exists(directory):
        raise DiscoveryError(f'Directory does not exist: {directory}')
    if not os.path.isdir(directory):
        raise DiscoveryError(f'Not a directory: {directory}')
    if not os.access(directory, os.R_OK | os.X_OK):
        raise DiscoveryError(f'Directory is not readable: {directory}')

    def on_error(err: OSError):
        logger.warning(f'Skipping unreadable path {err.filename}: {err.strerror}')

    spec_files = []
    for root, dirs, files in os.walk(directory, onerror=on_error):
        # Sorted in place so os.walk descends in a stable order
        dirs.sort()
        for name in sorted(files):
            filepath = os.path.join(root, name)
            relative = os.path.relpath(filepath, directory)
            if extension in relative:
                spec_files.append(filepath)
    return spec_files


def discover_spec_files(directory: str, extension: str) -> list[str]:
    """Recursively list files under directory whose relative path contains extension.

    Paths are returned joined onto `directory`, in top-down walk order with
    entries sorted by name. A missing or unreadable directory is logged and
    treated as having no spec files.

    Args:
        directory: Root directory to scan
        extension: Substring to look for, e.g. 'cy.js'

    Returns:
        List of spec file paths (possibly empty)
    """
    try:
        spec_files = _walk_spec_files(directory, extension)
    except DiscoveryError as e:
        logger.error(str(e))
        return []

    logger.info(f'Found {len(spec_files)} spec files matching "{extension}" in {directory}')
    return spec_files
