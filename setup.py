#!/usr/bin/env python
import os

from setuptools import find_packages, setup


def get_version():
    namespace = {}
    with open(os.path.join("src", "pie_tools", "version.py")) as f:
        exec(f.read(), namespace)
    return namespace["__version__"]


setup(
    name="pie-tools",
    version=get_version(),
    description="Python package for reading and writing PIE pixel art images",
    license="MIT",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "attrs>=23.1.0",
        "numpy",
        "Pillow>=10.3.0",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "pie-tools=pie_tools.__main__:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Topic :: Multimedia :: Graphics",
        "Topic :: Multimedia :: Graphics :: Graphics Conversion",
    ],
)
