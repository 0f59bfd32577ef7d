from flashrep.consts import VERSION

__version__ = VERSION
