from setuptools import setup, find_packages
import codecs
import os

here = os.path.abspath(os.path.dirname(__file__))

long_description = ""
if os.path.exists(os.path.join(here, "README.md")):
    with codecs.open(os.path.join(here, "README.md"), encoding="utf-8") as fh:
        long_description = "\n" + fh.read()

VERSION = '0.1.0'
DESCRIPTION = 'Procedural mesh generation, instancing and OBJ/glTF export'

# Setting up
setup(
    name="meshkit",
    version=VERSION,
    description=DESCRIPTION,
    long_description_content_type="text/markdown",
    long_description=long_description,
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=['numpy'],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'meshkit=meshkit.cli:main',
        ],
    },
    keywords=['python', 'three dimensional', 'mesh', 'obj', 'gltf', '3d'],
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ]
)
