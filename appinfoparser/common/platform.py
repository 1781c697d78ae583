import logging
import os

from enum import Enum

from appinfoparser.common.exceptions import UnrecognizedPlatform

logger = logging.getLogger(__name__)


class Platform(Enum):
    ANDROID = 'android'
    IOS = 'ios'


_PLATFORM_PER_EXTENSION = {
    '.apk': Platform.ANDROID,
    '.ipa': Platform.IOS,
}


def detect_platform(file_name):
    # Case-sensitive: "app.APK" is not recognized
    extension = os.path.splitext(file_name)[1]

    try:
        platform = _PLATFORM_PER_EXTENSION[extension]
    except KeyError:
        raise UnrecognizedPlatform(file_name, extension)

    logger.debug('"{}" is an {} package'.format(file_name, platform.value))
    return platform
