import logging

from io import BytesIO

import pyaxmlparser

from PIL import Image, UnidentifiedImageError

from appinfoparser.common.exceptions import FileOpenFailed, IconDecodeFailed, IconNotFound
from appinfoparser.common.outcome import Outcome

logger = logging.getLogger(__name__)


# Highest density bucket the icon is picked from. xxxhdpi is 640, so every standard bucket qualifies
ICON_TARGET_DENSITY = 720


def resolve_icon_and_label(apk_path):
    """Resolve the launcher icon and the application label through the resource table.

    The package is opened independently of the ZipFile used for the manifest: the resource
    table needs its own parsing context. A missing icon is fatal, a missing label is not.
    """
    parsed_apk = _open_apk(apk_path)

    try:
        icon = _resolve_icon(parsed_apk, apk_path).unwrap()

        label_outcome = _resolve_label(parsed_apk, apk_path)
        if label_outcome.error is not None:
            logger.debug('No label resolved for "{}", falling back to "{}": {}'.format(
                apk_path, label_outcome.value, label_outcome.error
            ))
        label = label_outcome.unwrap()
    finally:
        parsed_apk.zip.close()

    return icon, label


def _open_apk(apk_path):
    try:
        return pyaxmlparser.APK(apk_path)
    # The resource table parser raises anything from zipfile errors to struct errors
    except Exception as e:
        raise FileOpenFailed(apk_path, cause=e, step='opening resource table') from e


def _resolve_icon(parsed_apk, apk_path):
    try:
        icon_path = parsed_apk.get_app_icon(max_dpi=ICON_TARGET_DENSITY)
    except Exception as e:
        return Outcome.fatal(IconNotFound(apk_path, cause=e))

    if not icon_path:
        return Outcome.fatal(IconNotFound(apk_path))

    logger.debug('Icon of "{}" resolved to "{}" at density {}'.format(apk_path, icon_path, ICON_TARGET_DENSITY))

    try:
        icon_data = parsed_apk.get_file(icon_path)
    except Exception as e:
        return Outcome.fatal(IconNotFound(apk_path, cause=e, step='reading icon "{}"'.format(icon_path)))

    if not icon_data:
        return Outcome.fatal(IconNotFound(apk_path, step='reading icon "{}"'.format(icon_path)))

    try:
        icon = Image.open(BytesIO(icon_data))
        icon.load()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        return Outcome.fatal(IconDecodeFailed(apk_path, cause=e, step='decoding icon "{}"'.format(icon_path)))

    return Outcome.ok(icon)


def _resolve_label(parsed_apk, apk_path):
    try:
        label = parsed_apk.get_app_name()
    except Exception as e:
        return Outcome.recoverable('', error=e)

    if label is None:
        return Outcome.recoverable('')

    # pyaxmlparser hands back the raw reference ("@string/app_name", "@7F0D0000") when it cannot resolve it
    if label.startswith('@'):
        return Outcome.recoverable('', error=ValueError('unresolved label reference "{}"'.format(label)))

    return Outcome.ok(label)
