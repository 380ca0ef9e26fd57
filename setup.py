#!/usr/bin/env python3
"""Setup script for MindCanvas."""

from setuptools import setup, find_packages

setup(
    name="mindcanvas",
    version="1.0.0",
    description="A draggable radial mindmap editor for Linux",
    author="MindCanvas Project",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "mindcanvas": ["theme.css"],
    },
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "PyGObject>=3.46.0",
        "pycairo>=1.25.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "mindcanvas=mindcanvas.launcher:main",
        ],
        "gui_scripts": [
            "mindcanvas-gui=mindcanvas.launcher:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: X11 Applications :: GTK",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Topic :: Office/Business",
    ],
)
