import os
import plistlib
import struct
import zlib

from io import BytesIO
from unittest.mock import MagicMock
from zipfile import ZipFile

from PIL import Image

from appinfoparser.common.ios.pngcrush import PNG_SIGNATURE

# Red, green, blue and half-transparent white
PIXELS = ((255, 0, 0, 255), (0, 255, 0, 255), (0, 0, 255, 255), (255, 255, 255, 128))


def craft_png(size=(2, 2), pixels=PIXELS):
    image = Image.new('RGBA', size)
    image.putdata(list(pixels))
    png = BytesIO()
    image.save(png, format='PNG')
    return png.getvalue()


def _chunk(chunk_type, data):
    return struct.pack('>I4s', len(data), chunk_type) + data + struct.pack('>I', zlib.crc32(chunk_type + data))


def craft_optimized_png(width=2, height=2, pixels=PIXELS):
    """Build a PNG the way Xcode stores it: CgBI chunk, BGRA pixels, headerless deflate"""
    raw_rows = b''
    for row in range(height):
        raw_rows += b'\x00'
        for red, green, blue, alpha in pixels[row * width:(row + 1) * width]:
            raw_rows += bytes((blue, green, red, alpha))

    compressor = zlib.compressobj(9, zlib.DEFLATED, -zlib.MAX_WBITS)
    image_data = compressor.compress(raw_rows) + compressor.flush()

    return b''.join((
        PNG_SIGNATURE,
        _chunk(b'CgBI', b'\x50\x00\x20\x06'),
        _chunk(b'IHDR', struct.pack('>IIBBBBB', width, height, 8, 6, 0, 0, 0)),
        _chunk(b'IDAT', image_data),
        _chunk(b'IEND', b''),
    ))


def craft_plist(bundle_name='Example', bundle_display_name='', bundle_version='42',
                bundle_short_version='1.2.3', bundle_identifier='com.example.app', fmt=plistlib.FMT_BINARY):
    plist = {
        'CFBundleName': bundle_name,
        'CFBundleVersion': bundle_version,
        'CFBundleShortVersionString': bundle_short_version,
        'CFBundleIdentifier': bundle_identifier,
    }
    if bundle_display_name is not None:
        plist['CFBundleDisplayName'] = bundle_display_name
    return plistlib.dumps(plist, fmt=fmt)


def create_zip(path, entries):
    with ZipFile(path, 'w') as zip_file:
        for name, data in entries:
            zip_file.writestr(name, data)
    return path


def create_ipa(temp_dir, file_name='Example.ipa', plist=None, icon=None, extra_entries=()):
    entries = list(extra_entries)
    if plist is not None:
        entries.append(('Payload/Example.app/Info.plist', plist))
    if icon is not None:
        entries.append(('Payload/Example.app/AppIcon60x60@2x.png', icon))
    return create_zip(os.path.join(str(temp_dir), file_name), entries)


def create_apk(temp_dir, file_name='example.apk', with_manifest=True):
    entries = [('classes.dex', b'dex\n035\x00'), ('resources.arsc', b'\x02\x00\x0c\x00')]
    if with_manifest:
        entries.insert(0, ('AndroidManifest.xml', b'\x03\x00\x08\x00binary manifest'))
    return create_zip(os.path.join(str(temp_dir), file_name), entries)


ANDROID_NAMESPACE = 'http://schemas.android.com/apk/res/android'

_RES_XML_TYPE = 0x0003
_RES_STRING_POOL_TYPE = 0x0001
_RES_XML_START_NAMESPACE_TYPE = 0x0100
_RES_XML_END_NAMESPACE_TYPE = 0x0101
_RES_XML_START_ELEMENT_TYPE = 0x0102
_RES_XML_END_ELEMENT_TYPE = 0x0103

_TYPE_REFERENCE = 0x01
_TYPE_STRING = 0x03
_TYPE_INT_DEC = 0x10

_NO_INDEX = 0xffffffff


class _BinaryXmlWriter(object):
    """Minimal encoder of the compiled XML format found in APKs (UTF-16 string pool, no resource map)"""

    def __init__(self):
        self.strings = []
        self.nodes = []

    def string_index(self, string):
        if string not in self.strings:
            self.strings.append(string)
        return self.strings.index(string)

    def _node(self, chunk_type, body):
        # Line number and comment index
        header = struct.pack('<II', 1, _NO_INDEX)
        return struct.pack('<HHI', chunk_type, 16, 16 + len(body)) + header + body

    def namespace(self, chunk_type, prefix, uri):
        self.nodes.append(self._node(chunk_type, struct.pack(
            '<II', self.string_index(prefix), self.string_index(uri)
        )))

    def start_element(self, name, attributes):
        body = struct.pack(
            '<IIHHHHHH', _NO_INDEX, self.string_index(name), 20, 20, len(attributes), 0, 0, 0
        )
        for namespace, attribute_name, value_type, value in attributes:
            namespace_index = _NO_INDEX if namespace is None else self.string_index(namespace)
            if value_type == _TYPE_STRING:
                raw_value = data = self.string_index(value)
            else:
                raw_value, data = _NO_INDEX, value
            body += struct.pack(
                '<IIIHBBI', namespace_index, self.string_index(attribute_name), raw_value, 8, 0, value_type, data
            )
        self.nodes.append(self._node(_RES_XML_START_ELEMENT_TYPE, body))

    def end_element(self, name):
        self.nodes.append(self._node(_RES_XML_END_ELEMENT_TYPE, struct.pack(
            '<II', _NO_INDEX, self.string_index(name)
        )))

    def _string_pool(self):
        offsets = b''
        data = b''
        for string in self.strings:
            offsets += struct.pack('<I', len(data))
            data += struct.pack('<H', len(string)) + string.encode('utf-16-le') + b'\x00\x00'
        data += b'\x00' * (-len(data) % 4)

        header_size = 28
        strings_start = header_size + len(offsets)
        return struct.pack(
            '<HHIIIIII', _RES_STRING_POOL_TYPE, header_size, strings_start + len(data),
            len(self.strings), 0, 0, strings_start, 0,
        ) + offsets + data

    def to_bytes(self):
        # Nodes reference strings, so they are encoded first
        nodes = b''.join(self.nodes)
        body = self._string_pool() + nodes
        return struct.pack('<HHI', _RES_XML_TYPE, 8, 8 + len(body)) + body


def craft_binary_manifest(package='com.example.app', version_name='1.2.3', version_code=7, label=0x7f0d0000):
    """Compile an AndroidManifest.xml. ``label`` is a resource id (int) or a literal string"""
    writer = _BinaryXmlWriter()
    writer.namespace(_RES_XML_START_NAMESPACE_TYPE, 'android', ANDROID_NAMESPACE)

    manifest_attributes = [(None, 'package', _TYPE_STRING, package)]
    if version_name is not None:
        manifest_attributes.append((ANDROID_NAMESPACE, 'versionName', _TYPE_STRING, version_name))
    if version_code is not None:
        manifest_attributes.append((ANDROID_NAMESPACE, 'versionCode', _TYPE_INT_DEC, version_code))
    writer.start_element('manifest', manifest_attributes)

    label_type = _TYPE_REFERENCE if isinstance(label, int) else _TYPE_STRING
    writer.start_element('application', [(ANDROID_NAMESPACE, 'label', label_type, label)])
    writer.end_element('application')

    writer.end_element('manifest')
    writer.namespace(_RES_XML_END_NAMESPACE_TYPE, 'android', ANDROID_NAMESPACE)
    return writer.to_bytes()


def create_apk_with_binary_manifest(temp_dir, file_name='example.apk', **kwargs):
    return create_zip(os.path.join(str(temp_dir), file_name), (
        ('AndroidManifest.xml', craft_binary_manifest(**kwargs)),
        ('classes.dex', b'dex\n035\x00'),
    ))


MANIFEST_XML = b'''<?xml version="1.0" encoding="utf-8"?>
<manifest xmlns:android="http://schemas.android.com/apk/res/android"
    package="com.example.app" android:versionName="1.2.3" android:versionCode="7">
  <application android:label="@string/app_name" android:icon="@mipmap/ic_launcher"/>
</manifest>
'''


def craft_axml_printer_mock(xml=MANIFEST_XML, valid=True):
    printer_mock = MagicMock()
    printer_mock.is_valid.return_value = valid
    printer_mock.get_buff.return_value = xml
    return printer_mock


def craft_apk_mock(label='Example', icon_path='res/mipmap-xxxhdpi-v4/ic_launcher.png', icon_data=None):
    apk_mock = MagicMock()
    apk_mock.get_app_name.return_value = label
    apk_mock.get_app_icon.return_value = icon_path
    apk_mock.get_file.return_value = craft_png() if icon_data is None else icon_data
    return apk_mock
