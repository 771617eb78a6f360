# -*- coding: utf-8 -*-

from setuptools import setup

# All the meta-information lives in one place, but we exec it
# rather than import it: importing the package would require its
# dependencies to already be installed when pip runs us.
with open('onionrelay/_metadata.py') as f:
    exec(
        compile(f.read(), '_metadata.py', 'exec'),
        globals(),
        locals(),
    )

description = '''
    Onion routing overlay simulation: registry, relays and users
'''

setup(
    name='onionrelay',
    version=__version__,
    description=description,
    long_description=open('README.rst', 'r').read(),
    keywords=['python', 'onion routing', 'cryptography', 'anonymity'],
    install_requires=open('requirements.txt').readlines(),
    # "pip install -e .[dev]" will install development requirements
    extras_require=dict(
        dev=open('dev-requirements.txt').readlines(),
    ),
    classifiers=[
        'Intended Audience :: Developers',
        'License :: OSI Approved :: GNU Lesser General Public License v3 (LGPLv3)',
        'Topic :: Security :: Cryptography',
        'Programming Language :: Python :: 3',
    ],
    python_requires='>=3.7',
    author=__author__,
    author_email=__contact__,
    url=__url__,
    license=__license__,
    packages=["onionrelay"],
)
