#!/usr/bin/env python

from setuptools import setup

def long_description():
    try:
        with open('README.md') as f:
            return f.read()
    except OSError:
        return ''

setup(
    name = 'pegseq',
    version = '0.1.0',
    description = 'PEG parser combinators over lazy, replayable sequences',
    long_description = long_description(),
    long_description_content_type = 'text/markdown',
    install_requires = [],
    extras_require = {
        'test': ['pytest'],
    },
    packages = ['pegseq'],
    python_requires = '>=3.8',
    classifiers = [
        'Development Status :: 2 - Pre-Alpha',
        'Topic :: Software Development :: Interpreters',
        'Topic :: Software Development :: Compilers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
    ],
    platforms = 'any',
    license = 'MIT License',
    keywords = ['parser', 'peg', 'combinators', 'lazy'],
)
