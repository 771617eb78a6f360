__version__ = '0.1.0'
__author__ = 'onionrelay contributors'
__contact__ = 'onionrelay contributors'
__url__ = ''
__license__ = 'LGPLv3'
__copyright__ = 'Copyright 2024 onionrelay contributors'
