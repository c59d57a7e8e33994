import os

from setuptools import find_packages, setup


# read the version from the VERSION file
def get_version():
    with open(os.path.join(os.path.dirname(__file__), "VERSION"), "r") as version_file:
        return version_file.read().strip()


# Set the version in the cos_sdk/version.py file
def set_version_constant(version: str):
    with open(os.path.join(os.path.dirname(__file__), "cos_sdk", "version.py"), "w") as version_file:
        version_file.write(f'__version__ = "{version}"\n')


version = get_version()
set_version_constant(version)

setup(
    name="cos-sdk-core",
    version=version,
    description="Wire protocol core of an AWS compatible object storage and KMS SDK",
    packages=find_packages(include=["cos_sdk", "cos_sdk.*"]),
    python_requires=">=3.8",
    install_requires=[
        "amazon.ion>=0.9.3",
        "botocore>=1.31",
        "cbor2>=5.4.0",
        "requests>=2.20.0",
        "werkzeug>=3.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.2",
            "pytest-httpserver>=1.0.1",
        ],
    },
)
