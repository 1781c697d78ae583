import logging
import os

from collections import namedtuple
from zipfile import BadZipFile, ZipFile

from appinfoparser.common.android.manifest import parse_android_manifest
from appinfoparser.common.android.resources import resolve_icon_and_label
from appinfoparser.common.container import scan_entries
from appinfoparser.common.exceptions import ContainerReadFailed, FileOpenFailed
from appinfoparser.common.ios.icon import parse_ios_icon
from appinfoparser.common.ios.plist import parse_ios_plist
from appinfoparser.common.platform import Platform, detect_platform

logger = logging.getLogger(__name__)


class PackageInfo(namedtuple('PackageInfo', ('name', 'bundle_id', 'version', 'build', 'icon', 'size'))):
    __slots__ = ()

    def as_dict(self):
        return {
            'name': self.name,
            'bundle_id': self.bundle_id,
            'version': self.version,
            'build': self.build,
            'size': self.size,
            'has_icon': self.icon is not None,
        }


def parse_package(package_path):
    """Extract name, identifier, version, build, icon and size of an .apk or .ipa file.

    Either a fully populated ``PackageInfo`` is returned or a ``PackageInfoError`` is raised.
    """
    logger.info('Extracting package info from "{}"...'.format(package_path))

    try:
        size = os.stat(package_path).st_size
    except OSError as e:
        raise FileOpenFailed(package_path, cause=e) from e

    platform = detect_platform(package_path)

    try:
        with ZipFile(package_path) as package_zip:
            entries = scan_entries(package_zip)
            if platform is Platform.ANDROID:
                package_info = _parse_apk(package_zip, entries, package_path, size)
            else:
                package_info = _parse_ipa(package_zip, entries, package_path, size)
    except BadZipFile as e:
        raise ContainerReadFailed(package_path, cause=e) from e
    except OSError as e:
        raise FileOpenFailed(package_path, cause=e) from e

    logger.info('"{}" is {} {} ({})'.format(
        package_path, package_info.bundle_id, package_info.version, package_info.build
    ))
    return package_info


def _parse_apk(apk_zip, entries, apk_path, size):
    manifest = parse_android_manifest(apk_zip, entries.android_manifest, apk_path)
    icon, label = resolve_icon_and_label(apk_path)

    return PackageInfo(
        name=label,
        bundle_id=manifest.package,
        version=manifest.version_name,
        build=manifest.version_code,
        icon=icon,
        size=size,
    )


def _parse_ipa(ipa_zip, entries, ipa_path, size):
    plist = parse_ios_plist(ipa_zip, entries.info_plist, ipa_path)
    icon = parse_ios_icon(ipa_zip, entries.ios_icon, ipa_path)

    return PackageInfo(
        name=plist.display_name,
        bundle_id=plist.bundle_identifier,
        version=plist.bundle_short_version,
        build=plist.bundle_version,
        icon=icon,
        size=size,
    )
