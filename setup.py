
import os
from setuptools import setup, find_packages

__dir__ = os.path.dirname(__file__)

with open(
    os.path.join(__dir__, 'pyssgsea', 'version.py')
) as f:
    __version__ = '0.0.0'

    for line in f:
        if '#' in line:
            line = line[:line.index('#')]

        if not line.startswith('version ='):
            continue

        __version__ = line.split('=')[1].strip().strip('\'').strip('\"')

REQUIREMENTS = [
    'numpy>=1.17',
    'pandas>=1.0',
]

if __name__ == '__main__':
    setup(
        name='pyssgsea',
        version=__version__,
        description='Single-sample gene set enrichment scores',
        license='BSD-2-Clause',
        packages=find_packages(exclude=['*.tests', 'tests']),
        install_requires=REQUIREMENTS,
        extras_require={
            'tests': [
                'pytest',
            ],
        },
        python_requires='>=3.6',
        classifiers=[
            'License :: OSI Approved :: BSD License',
            'Natural Language :: English',
            'Operating System :: OS Independent',
            'Programming Language :: Python :: 3',
            'Topic :: Scientific/Engineering',
        ],
        test_suite='tests',
    )
