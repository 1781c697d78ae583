import logging


def init(level=logging.DEBUG):
    FORMAT = '%(asctime)s - %(filename)s - %(levelname)s - %(message)s'
    logging.basicConfig(format=FORMAT, level=level)
    logging.getLogger('pyaxmlparser').setLevel(logging.WARNING)
    logging.getLogger('PIL').setLevel(logging.WARNING)
