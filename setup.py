import os

from setuptools import find_packages, setup

VERSION = '0.3.0'


def parse_md_readme():
    """
    read the readme for the long description, empty if it is not available
    """
    try:
        with open(os.path.join(os.path.dirname(__file__), 'README.md')) as fh:
            return fh.read()
    except OSError:
        return ''


# HSTLIB is a dependency for pysam.
# The cram file libraries fail for some OS versions and svbreak does not use cram files so we disable these options
os.environ['HTSLIB_CONFIGURE_OPTIONS'] = '--disable-lzma --disable-bz2 --disable-libcurl'


TEST_REQS = [
    'coverage>=4.2',
    'pytest',
    'pytest-cov',
]


INSTALL_REQS = [
    'biopython>=1.78',
    'braceexpand>=0.1.2',
    'numpy>=1.13.1',
    'pysam>=0.15.2',
    'shortuuid>=0.5.0',
]


setup(
    name='svbreak',
    version='{}'.format(VERSION),
    packages=find_packages(exclude=['tests', 'tests.*']),
    description='Scoring, filtering and serialization of structural variant and indel breakpoints',
    long_description=parse_md_readme(),
    long_description_content_type='text/markdown',
    install_requires=INSTALL_REQS,
    extras_require={
        'test': TEST_REQS,
        'dev': ['black', 'flake8'] + TEST_REQS,
    },
    python_requires='>=3.6',
    test_suite='tests',
    entry_points={
        'console_scripts': [
            'svbreak = svbreak.main:main',
        ]
    },
)
