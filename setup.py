"""
usbmux-py - Python usbmuxd Client
Pure Python client for the USB multiplexing daemon used to reach iOS devices.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read version from __init__.py
version_file = Path(__file__).parent / "usbmux_py" / "__init__.py"
version_content = version_file.read_text()
version_line = [
    line for line in version_content.split("\n") if line.startswith("__version__")
]
if version_line:
    version = version_line[0].split("=")[1].strip().strip('"')
else:
    version = "0.1.0"

# Read README for long description
readme_file = Path(__file__).parent / "usbmux_py" / "README.md"
if readme_file.exists():
    long_description = readme_file.read_text()
else:
    long_description = "Pure Python usbmuxd client"

setup(
    name="usbmux-py",
    version=version,
    description="Pure Python client for usbmuxd: list iOS devices and open streams to device ports",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests*", "examples*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: POSIX",
        "Topic :: System :: Hardware",
    ],
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "dev": [
            "pytest>=8.0.0",
            "black>=24.0.0",
            "mypy>=1.8.0",
        ],
    },
)
