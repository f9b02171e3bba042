#!/usr/bin/env python
# -*- coding: utf-8 -*-
from setuptools import find_packages, setup

# There are problems running setup.py on Windows if the encoding is not set
with open('README.md', encoding='utf8') as readme_file:
    readme = readme_file.read()


setup(
    name='fleetapi',
    version='0.1.0',
    description="Enrolls agents into Fleet over its HTTP API.",
    long_description=readme,
    long_description_content_type="text/markdown",
    packages=find_packages(include=['fleetapi', 'fleetapi.*']),
    package_data={'fleetapi': ['VERSION']},
    entry_points={
        'console_scripts': [
            'fleetapi=fleetapi.cli:cli'
        ]
    },
    include_package_data=True,
    install_requires=[
        'Click>=8.0',
        'httpx>=0.23',
        'pydantic>=2.0',
        'certifi',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    python_requires=">=3.9",
    license="MIT license",
    zip_safe=False,
    keywords='fleet enrollment agent',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ]
)
