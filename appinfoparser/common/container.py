import logging
import re
import zlib

from collections import namedtuple
from zipfile import BadZipFile

from appinfoparser.common.exceptions import ContainerReadFailed

logger = logging.getLogger(__name__)


_ANDROID_MANIFEST_NAME = 'AndroidManifest.xml'
_INFO_PLIST_PATTERN = re.compile(r'^Payload/[^/]+/Info\.plist$')
_IOS_ICON_NAME_FRAGMENT = 'AppIcon60x60'


ContainerEntries = namedtuple('ContainerEntries', ('android_manifest', 'info_plist', 'ios_icon'))


def scan_entries(zip_file):
    """Find the entries of interest without decompressing any of them.

    The earliest entry in archive order wins each category. Categories without any match are
    left to ``None``.
    """
    android_manifest = info_plist = ios_icon = None

    for zip_info in zip_file.infolist():
        name = zip_info.filename
        if name == _ANDROID_MANIFEST_NAME:
            if android_manifest is None:
                android_manifest = zip_info
        elif _INFO_PLIST_PATTERN.match(name):
            if info_plist is None:
                info_plist = zip_info
        elif _IOS_ICON_NAME_FRAGMENT in name:
            if ios_icon is None:
                ios_icon = zip_info

    entries = ContainerEntries(android_manifest, info_plist, ios_icon)
    logger.debug('Entries found in "{}": {}'.format(zip_file.filename, {
        category: entry.filename for category, entry in entries._asdict().items() if entry is not None
    }))
    return entries


def read_entry(zip_file, entry, package_path):
    try:
        with zip_file.open(entry) as entry_file:
            return entry_file.read()
    # ZipFile raises RuntimeError for encrypted entries and NotImplementedError for unknown compression methods
    except (BadZipFile, OSError, zlib.error, EOFError, RuntimeError, NotImplementedError) as e:
        raise ContainerReadFailed(package_path, cause=e, step='reading "{}"'.format(entry.filename)) from e
