import runpy
from pathlib import Path

from setuptools import setup

ROOT_DIR = Path(__file__).parent.resolve() / "app"

# read without importing the package, its dependencies may not be installed yet
__version_string__ = runpy.run_path(str(ROOT_DIR / "runes" / "__version__.py"))["__version_string__"]

setup(
    name="runes",
    version=__version_string__,
    packages=["runes", "runes.util"],
    package_dir={"runes": "app/runes", "runes.util": "app/runes/util"},
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        "numpy",
        "returns",
        "rich",
        "bitarray",
    ],
    extras_require={"test": ["pytest"]},
    zip_safe=False,
)
