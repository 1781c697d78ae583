import logging
import plistlib

from collections import namedtuple
from xml.parsers.expat import ExpatError

from appinfoparser.common.container import read_entry
from appinfoparser.common.exceptions import PlistDecodeFailed, PlistNotFound

logger = logging.getLogger(__name__)


_FIELD_PER_PLIST_KEY = (
    ('bundle_name', 'CFBundleName'),
    ('bundle_display_name', 'CFBundleDisplayName'),
    ('bundle_version', 'CFBundleVersion'),
    ('bundle_short_version', 'CFBundleShortVersionString'),
    ('bundle_identifier', 'CFBundleIdentifier'),
)


class IosPlistRecord(namedtuple('IosPlistRecord', [field for field, _ in _FIELD_PER_PLIST_KEY])):
    __slots__ = ()

    @property
    def display_name(self):
        return self.bundle_display_name if self.bundle_display_name else self.bundle_name


def parse_ios_plist(ipa_zip, plist_entry, ipa_path):
    if plist_entry is None:
        raise PlistNotFound(ipa_path)

    plist_data = read_entry(ipa_zip, plist_entry, ipa_path)

    try:
        plist = plistlib.loads(plist_data)
    except (plistlib.InvalidFileException, ExpatError, ValueError, TypeError, KeyError, IndexError) as e:
        raise PlistDecodeFailed(ipa_path, cause=e) from e

    if not isinstance(plist, dict):
        raise PlistDecodeFailed(ipa_path, cause='top-level object is a {}, not a dictionary'.format(
            type(plist).__name__
        ))

    record = IosPlistRecord(**{
        field: _get_string(plist, key) for field, key in _FIELD_PER_PLIST_KEY
    })
    logger.info('Found bundle "{}", version "{}" ({}) in "{}"'.format(
        record.bundle_identifier, record.bundle_short_version, record.bundle_version, ipa_path
    ))
    return record


def _get_string(plist, key):
    value = plist.get(key)
    if value is None:
        return ''
    return value if isinstance(value, str) else str(value)
