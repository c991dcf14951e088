# setup.py

import setuptools
from setuptools import setup, find_packages

if __name__ == "__main__":
    setup(
        name='jte',
        version='0.1.0',  # Ensure consistency with jte/__init__.py
        description='Typed builtin functions for a JSON-e style template expression language',
        packages=find_packages(include=["jte", "jte.*"]),  # Restrict to jte and its subpackages
        include_package_data=True,
        python_requires=">=3.8",
        install_requires=[
            "lark>=1.1",
            "rapidfuzz>=3.0",
        ],
        extras_require={
            "test": ["pytest>=7"],
        },
        entry_points={
            "console_scripts": [
                "jte=jte.console_script:main"
            ]
        },
    )
