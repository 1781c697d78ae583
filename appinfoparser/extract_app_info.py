#!/usr/bin/env python3

import json
import logging
import sys

from appinfoparser.common import main_logging
from appinfoparser.common.base import ArgumentParser, Base
from appinfoparser.common.exceptions import PackageInfoError
from appinfoparser.common.parser import parse_package

logger = logging.getLogger(__name__)


class ExtractAppInfo(Base):

    @classmethod
    def _init_parser(cls):
        cls.parser = ArgumentParser(
            description='Print name, identifier, version, build and size of an Android (.apk) or iOS (.ipa) package'
        )
        cls.parser.add_argument('package', metavar='path_to_package', help='The .apk or .ipa to inspect')
        cls.parser.add_argument('--icon-output', help='Save the application icon as PNG to this path')
        cls.parser.add_argument('--output-file', help='Write JSON to this file instead of stdout')

    def run(self):
        package_info = parse_package(self.config.package)

        if self.config.icon_output:
            package_info.icon.save(self.config.icon_output, format='PNG')
            logger.info('Icon saved to "{}"'.format(self.config.icon_output))

        output = json.dumps(package_info.as_dict(), indent=2, sort_keys=True)
        if self.config.output_file:
            with open(self.config.output_file, 'w') as f:
                f.write(output)
            logger.info('Package info written to "{}"'.format(self.config.output_file))
        else:
            print(output)

        return package_info


def main():
    main_logging.init()

    try:
        ExtractAppInfo().run()
    except PackageInfoError:
        # Already logged when raised
        sys.exit(1)


__name__ == '__main__' and main()
