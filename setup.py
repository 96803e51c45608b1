""" copayproof build script for setuptools.

"""

from setuptools import find_packages, setup  # type: ignore

import copayproof

with open("README.md", "r", encoding="ascii") as file_:
    longdescription = file_.read()

setup(
    name=copayproof.name,
    version=copayproof.__version__,
    license=copayproof.__license__,
    author=copayproof.__author__,
    author_email=copayproof.__author_email__,
    description="Signed attestation of the addresses of a Copay multisig wallet",
    long_description=longdescription,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=["dataclasses_json", "cryptography", "requests"],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["copayproof=copayproof.cli:main"]},
    keywords=(
        "bitcoin copay multisig bip32 bip44 bip45 bip67 p2sh "
        "message-signing proof-of-reserves"
    ),
    python_requires=">=3.7",
    classifiers=[
        "Programming Language :: Python :: 3.7",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Financial and Insurance Industry",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Topic :: Security :: Cryptography",
    ],
)
