import argparse
import logging

from appinfoparser.common.exceptions import WrongArgumentGiven

logger = logging.getLogger(__name__)


class Base(object):
    parser = None

    def __init__(self, config=None):
        self.config = self._parse_config(config)

    @classmethod
    def _init_parser(cls):
        raise NotImplementedError

    @classmethod
    def _parse_config(cls, config=None):
        if cls.parser is None:
            cls._init_parser()

        args = None if config is None else cls._convert_dict_into_args(config)
        # Parses sys.argv if args is None
        return cls.parser.parse_args(args)

    @staticmethod
    def _convert_dict_into_args(dict_):
        # For instance "icon_output" being "icon.png" gives "--icon-output icon.png".
        # Positional arguments are given under the "*args" key.
        dict_without_positional_arguments = {
            key: value for key, value in dict_.items() if key != '*args'
        }
        dict_without_deactivated_unary_arguments = {
            key: value for key, value in dict_without_positional_arguments.items()
            if value is not False and value is not None
        }

        dash_dash_dict = {
            '--{}'.format(key.replace('_', '-')): value
            for key, value in dict_without_deactivated_unary_arguments.items()
        }

        args_with_unary_arguments_alone = [
            (key, value) if not isinstance(value, bool) else (key,)
            for key, value in dash_dash_dict.items()
        ]

        flattened_args = [str(item) for tuples in args_with_unary_arguments_alone for item in tuples]
        flattened_args += [str(arg) for arg in dict_.get('*args', [])]

        logger.debug('dict_ converted into these args: {}'.format(flattened_args))
        return flattened_args


class ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise WrongArgumentGiven(message)
