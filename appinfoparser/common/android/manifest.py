import logging

from collections import namedtuple
from xml.dom import minidom
from xml.parsers.expat import ExpatError

from pyaxmlparser.axmlprinter import AXMLPrinter

from appinfoparser.common.container import read_entry
from appinfoparser.common.exceptions import ManifestDecodeFailed, ManifestNotFound

logger = logging.getLogger(__name__)


AndroidManifestRecord = namedtuple('AndroidManifestRecord', ('package', 'version_name', 'version_code'))


def parse_android_manifest(apk_zip, manifest_entry, apk_path):
    if manifest_entry is None:
        raise ManifestNotFound(apk_path)

    manifest_binary_content = read_entry(apk_zip, manifest_entry, apk_path)
    xml_manifest = _decode_binary_xml(manifest_binary_content, apk_path)
    root = xml_manifest.documentElement

    # getAttribute() returns an empty string for missing attributes
    record = AndroidManifestRecord(
        package=root.getAttribute('package'),
        version_name=root.getAttribute('android:versionName'),
        version_code=root.getAttribute('android:versionCode'),
    )
    logger.info('Found package "{}", version "{}" ({}) in "{}"'.format(
        record.package, record.version_name, record.version_code, apk_path
    ))
    return record


def _decode_binary_xml(manifest_binary_content, apk_path):
    try:
        printer = AXMLPrinter(manifest_binary_content)
        if not printer.is_valid():
            raise ValueError('not a valid binary XML document')
        manifest_string_content = printer.get_buff()
    # pyaxmlparser reports truncated or garbled chunks through several exception types
    except Exception as e:
        raise ManifestDecodeFailed(apk_path, cause=e) from e

    try:
        return minidom.parseString(manifest_string_content)
    except ExpatError as e:
        raise ManifestDecodeFailed(apk_path, cause=e) from e
