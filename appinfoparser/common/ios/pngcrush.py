"""Revert the PNG optimization Xcode applies to the images it bundles.

Xcode runs ``pngcrush -iphone`` over PNG resources. The result is not a standard PNG anymore:

* a ``CgBI`` chunk is inserted before ``IHDR``;
* the image data is deflated without the zlib header and checksum;
* pixels are stored in BGR(A) order instead of RGB(A).

Standard decoders refuse such files. ``revert_optimization()`` rewrites them into a regular PNG.
"""

import logging
import struct
import zlib

from io import BytesIO

logger = logging.getLogger(__name__)


PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'

_CHUNK_HEADER = struct.Struct('>I4s')
_IHDR = struct.Struct('>IIBBBBB')

_COLOR_TYPE_RGB = 2
_COLOR_TYPE_RGBA = 6
_BYTES_PER_PIXEL_PER_COLOR_TYPE = {
    _COLOR_TYPE_RGB: 3,
    _COLOR_TYPE_RGBA: 4,
}


class PngFormatError(Exception):
    pass


class ImageDataError(PngFormatError):
    """The image data could not be reverted.

    ``partial_output`` holds what was written so far, with the original image data copied
    unchanged. It is a valid PNG when the input was not optimized in the first place.
    """

    def __init__(self, msg, partial_output):
        super(ImageDataError, self).__init__(msg)
        self.partial_output = partial_output


def is_optimized(data):
    # Xcode always puts CgBI first, before IHDR
    first_chunk_type = data[len(PNG_SIGNATURE) + 4:len(PNG_SIGNATURE) + _CHUNK_HEADER.size]
    return data.startswith(PNG_SIGNATURE) and first_chunk_type == b'CgBI'


def revert_optimization(input_stream):
    signature = input_stream.read(len(PNG_SIGNATURE))
    if signature != PNG_SIGNATURE:
        raise PngFormatError('Not a PNG file: bad signature {!r}'.format(signature))

    output = BytesIO()
    output.write(PNG_SIGNATURE)

    header = None
    idat_chunks = []

    for chunk_type, data in _iter_chunks(input_stream):
        if chunk_type == b'CgBI':
            logger.debug('Dropping CgBI chunk')
        elif chunk_type == b'IHDR':
            header = _parse_header(data)
            _write_chunk(output, chunk_type, data)
        elif chunk_type == b'IDAT':
            idat_chunks.append(data)
        elif chunk_type == b'IEND':
            if header is None:
                raise PngFormatError('IEND reached before IHDR')
            _write_image_data(output, header, idat_chunks)
            _write_chunk(output, b'IEND', b'')
            return output.getvalue()
        else:
            _write_chunk(output, chunk_type, data)

    raise PngFormatError('Unexpected end of file: no IEND chunk')


def _iter_chunks(stream):
    while True:
        raw_header = stream.read(_CHUNK_HEADER.size)
        if not raw_header:
            return
        if len(raw_header) < _CHUNK_HEADER.size:
            raise PngFormatError('Truncated chunk header')

        length, chunk_type = _CHUNK_HEADER.unpack(raw_header)
        data = stream.read(length)
        crc = stream.read(4)
        if len(data) < length or len(crc) < 4:
            raise PngFormatError('Truncated {!r} chunk'.format(chunk_type))

        yield chunk_type, data


def _parse_header(data):
    if len(data) != _IHDR.size:
        raise PngFormatError('IHDR chunk has length {}, expected {}'.format(len(data), _IHDR.size))

    width, height, bit_depth, color_type, _, _, interlace = _IHDR.unpack(data)
    return {
        'width': width,
        'height': height,
        'bit_depth': bit_depth,
        'color_type': color_type,
        'interlace': interlace,
    }


def _write_chunk(output, chunk_type, data):
    output.write(_CHUNK_HEADER.pack(len(data), chunk_type))
    output.write(data)
    output.write(struct.pack('>I', zlib.crc32(chunk_type + data) & 0xffffffff))


def _write_image_data(output, header, idat_chunks):
    compressed = b''.join(idat_chunks)

    try:
        pixels = _inflate_raw(compressed)
        pixels = _swap_red_and_blue(pixels, header)
    except (zlib.error, ValueError) as e:
        for data in idat_chunks:
            _write_chunk(output, b'IDAT', data)
        _write_chunk(output, b'IEND', b'')
        raise ImageDataError('Cannot revert image data: {}'.format(e), output.getvalue())

    _write_chunk(output, b'IDAT', zlib.compress(bytes(pixels)))


def _inflate_raw(compressed):
    decompressor = zlib.decompressobj(-zlib.MAX_WBITS)
    pixels = decompressor.decompress(compressed)
    if not decompressor.eof:
        raise ValueError('deflate stream is incomplete')
    return pixels


def _swap_red_and_blue(pixels, header):
    bytes_per_pixel = _BYTES_PER_PIXEL_PER_COLOR_TYPE.get(header['color_type'])
    if header['bit_depth'] != 8 or bytes_per_pixel is None or header['interlace']:
        logger.debug('Leaving channels untouched for header {}'.format(header))
        return pixels

    width, height = header['width'], header['height']
    # Every scanline starts with its filter type byte
    stride = 1 + width * bytes_per_pixel
    if len(pixels) < stride * height:
        raise ValueError('image data has {} bytes, expected {}'.format(len(pixels), stride * height))

    # Filters work channel by channel, so swapping filtered bytes is equivalent to swapping pixels
    swapped = bytearray(pixels)
    for row_start in range(0, stride * height, stride):
        first_pixel = row_start + 1
        row_end = row_start + stride
        swapped[first_pixel:row_end:bytes_per_pixel] = pixels[first_pixel + 2:row_end:bytes_per_pixel]
        swapped[first_pixel + 2:row_end:bytes_per_pixel] = pixels[first_pixel:row_end:bytes_per_pixel]
    return swapped
