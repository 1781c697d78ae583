import logging

logger = logging.getLogger(__name__)


class LoggedError(Exception):
    def __init__(self, msg):
        logger.fatal(msg)
        super(LoggedError, self).__init__(msg)


class WrongArgumentGiven(LoggedError):
    pass


class PackageInfoError(LoggedError):
    step = 'extracting package info'

    def __init__(self, path, cause=None, step=None, msg=None):
        self.path = path
        self.cause = cause
        if step is not None:
            self.step = step

        if msg is None:
            msg = 'Failed {} of "{}"'.format(self.step, path)
        if cause is not None:
            msg = '{}: {}'.format(msg, cause)
        super(PackageInfoError, self).__init__(msg)


class UnrecognizedPlatform(PackageInfoError):
    step = 'detecting platform'

    def __init__(self, path, extension):
        self.extension = extension
        super(UnrecognizedPlatform, self).__init__(
            path, msg='"{}" is not a package I understand. Unknown extension "{}", expected ".apk" or ".ipa"'.format(
                path, extension
            )
        )


class MalformedPackage(PackageInfoError):
    pass


class FileOpenFailed(MalformedPackage):
    step = 'opening'


class ContainerReadFailed(MalformedPackage):
    step = 'reading'


class ManifestNotFound(MalformedPackage):
    step = 'locating AndroidManifest.xml'

    def __init__(self, path):
        super(ManifestNotFound, self).__init__(path, msg='AndroidManifest.xml is not found in "{}"'.format(path))


class ManifestDecodeFailed(MalformedPackage):
    step = 'decoding AndroidManifest.xml'


class PlistNotFound(MalformedPackage):
    step = 'locating Info.plist'

    def __init__(self, path):
        super(PlistNotFound, self).__init__(path, msg='Info.plist is not found in "{}"'.format(path))


class PlistDecodeFailed(MalformedPackage):
    step = 'decoding Info.plist'


class IconNotFound(MalformedPackage):
    step = 'locating icon'

    def __init__(self, path, cause=None, step=None):
        super(IconNotFound, self).__init__(
            path, cause=cause, step=step, msg='Icon is not found in "{}"'.format(path)
        )


class IconTransformFailed(MalformedPackage):
    step = 'reverting png optimization of icon'


class IconDecodeFailed(MalformedPackage):
    step = 'decoding icon'
