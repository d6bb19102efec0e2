# setup.py
from setuptools import find_namespace_packages, setup

setup(
    name="vsprojm",
    version="0.1.0",
    description="Manage source files, filters and build properties of Visual C++ (.vcxproj) projects",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["vsprojm", "vsprojm.*"]),
    package_data={"vsprojm.interface": ["locales/*.json"]},
    include_package_data=True,
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "vsprojm=vsprojm.interface.cli.app:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],
)
