from setuptools import setup, find_packages
from codecs import open
from os import path

package_name = 'biomedyn'

version = {}
with open("version.py") as fp:
    exec(fp.read(), version)

here = path.abspath(path.dirname(__file__))

# Get the long description from the relevant file
with open(path.join(here, 'README.rst'), encoding='utf-8') as f:
    long_description = f.read()


setup(
    name=package_name,
    version = str(version['__version__']),
    packages=find_packages(exclude=['tests', 'tests.*']),
    scripts=[],
    license='MIT',
    description='Inferring species interactions from microbiome time series',
    keywords=[
        'microbiome',
        'lotka-volterra',
        'stepwise regression',
        'bagging',
        'computational biology'],
    long_description=long_description,
    long_description_content_type='text/x-rst',
    install_requires=[
        "scikit-learn",
        "scipy",
        "numpy",
        "pandas",
        "joblib",
        "tqdm",
        "networkx"],
    extras_require={
        'graphviz': ["pygraphviz"],
        'test': ["pytest"]},
    python_requires='>=3.8',
    classifiers=[
        'Development Status :: 4 - Beta',
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Information Analysis",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "Topic :: Software Development :: Libraries",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3"],
    include_package_data=True,
    )
