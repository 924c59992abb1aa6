#!/usr/bin/env python3
"""Setup script for playlist_localizer."""

from setuptools import setup, find_packages


def read_requirements(filename):
    """Read requirements from file."""
    with open(filename, 'r') as f:
        return [line.strip() for line in f if line.strip() and not line.startswith('#')]


def read_readme():
    """Read README file."""
    with open('README.md', 'r', encoding='utf-8') as f:
        return f.read()


setup(
    name="playlist-localizer",
    version="1.0.0",
    description="Relocate M3U playlist entries to the matching files of a local music library",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=read_requirements('requirements.txt'),
    extras_require={
        'dev': read_requirements('requirements-dev.txt'),
        'test': read_requirements('requirements-dev.txt'),
    },
    entry_points={
        'console_scripts': [
            'playlist_localizer=playlist_localizer.cli:main',
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Utilities",
    ],
    python_requires=">=3.11",
    keywords="music, playlist, m3u, audio, library",
)
