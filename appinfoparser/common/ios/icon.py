import logging

from io import BytesIO

from PIL import Image, UnidentifiedImageError

from appinfoparser.common.container import read_entry
from appinfoparser.common.exceptions import IconDecodeFailed, IconNotFound, IconTransformFailed
from appinfoparser.common.ios.pngcrush import ImageDataError, PngFormatError, is_optimized, revert_optimization
from appinfoparser.common.outcome import Outcome, OutcomeKind

logger = logging.getLogger(__name__)


def parse_ios_icon(ipa_zip, icon_entry, ipa_path):
    if icon_entry is None:
        raise IconNotFound(ipa_path)

    icon_data = read_entry(ipa_zip, icon_entry, ipa_path)
    logger.debug('Icon "{}" of "{}" is {}optimized by Xcode'.format(
        icon_entry.filename, ipa_path, '' if is_optimized(icon_data) else 'not '
    ))

    outcome = revert_icon_optimization(BytesIO(icon_data), ipa_path)
    if outcome.kind is OutcomeKind.RECOVERABLE:
        logger.warning('Icon "{}" of "{}" was only partially reverted ({}). Decoding it as is'.format(
            icon_entry.filename, ipa_path, outcome.error
        ))

    return decode_png(outcome.unwrap(), ipa_path)


def revert_icon_optimization(icon_file, ipa_path):
    try:
        return Outcome.ok(revert_optimization(icon_file))
    except ImageDataError as e:
        return Outcome.recoverable(e.partial_output, error=e)
    except PngFormatError as e:
        return Outcome.fatal(IconTransformFailed(ipa_path, cause=e))


def decode_png(png_data, ipa_path):
    try:
        image = Image.open(BytesIO(png_data))
        image.load()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise IconDecodeFailed(ipa_path, cause=e) from e
    return image
