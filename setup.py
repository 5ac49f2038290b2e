"""Packaging for TakeARest.

Install for development:
    pip install -e ".[test]"

Build a macOS .app bundle:
    pip install py2app
    python setup.py py2app
"""

import sys

from setuptools import setup, find_packages

APP = ["main.py"]
DATA_FILES = []
OPTIONS = {
    "argv_emulation": False,
    "iconfile": None,
    "plist": {
        "CFBundleName": "TakeARest",
        "CFBundleDisplayName": "TakeARest",
        "CFBundleIdentifier": "com.takearest.app",
        "CFBundleVersion": "0.1.0",
        "CFBundleShortVersionString": "0.1.0",
        "NSHighResolutionCapable": True,
        "LSMinimumSystemVersion": "13.0",
        "LSUIElement": False,
    },
}

# py2app is only needed (and only installable on macOS) for bundle builds.
bundle_kwargs = {}
if "py2app" in sys.argv:
    bundle_kwargs = {
        "app": APP,
        "data_files": DATA_FILES,
        "options": {"py2app": OPTIONS},
        "setup_requires": ["py2app"],
    }

setup(
    name="TakeARest",
    version="0.1.0",
    description="Work/rest interval timer with a blocking rest overlay",
    packages=find_packages(include=["takearest", "takearest.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.5",
        "SQLAlchemy>=2.0",
        # screen lock detection on macOS
        "pyobjc-framework-Cocoa>=9; sys_platform == 'darwin'",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "gui_scripts": ["takearest = takearest.__main__:main"],
    },
    **bundle_kwargs,
)
