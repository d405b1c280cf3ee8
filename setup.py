""" A setuptools-based setup module. """

from setuptools import setup, find_packages
from os import path

here = path.abspath(path.dirname(__file__))

# Get the long description from the README file
with open(path.join(here, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

setup(
    name='flowfunding', # Required
    version='0.0.1',  # Required
    description='Simulates flow circulating through a funding network',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='Christopher Scott',
    author_email='christopher@christopherscott.ca',

    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Topic :: Scientific/Engineering :: Information Analysis',
        'Topic :: Software Development :: Libraries',
        'License :: Other/Proprietary License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3 :: Only',
        'Natural Language :: English'
    ],

    keywords='flow funding network propagation allocation',

    packages=find_packages(exclude=['contrib', 'docs', 'tests', 'tests.*']),
    python_requires='>=3.7',

    install_requires=[
        'networkx>=2.3'
    ],

    # `pytest` runs the unittest suite under `tests/`.
    extras_require={
        'doc': ['sphinx'],
        'test': ['pytest']
    },

    # Default settings are read from `flowfunding/data/settings.json`:
    package_data={
        'flowfunding': ['data/*.json'],
    },
)
