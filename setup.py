"""
Setup script for kmeans-color-quantizer package
"""

# Always prefer setuptools over distutils
from setuptools import setup, find_packages
# To use a consistent encoding
from codecs import open
from os import path

here = path.abspath(path.dirname(__file__))

# Get the long description from the relevant file
with open(path.join(here, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

# Get the code version
version = {}
with open(path.join(here, "kmeans/version.py")) as fp:
    exec(fp.read(), version)
__version__ = version['__version__']
# now we have a `__version__` variable

setup(
    name='kmeans-color-quantizer',
    version=__version__,
    description='Deterministic K-means (k-means++ / Lloyd) clustering for image color quantization',
    long_description=long_description,
    long_description_content_type='text/markdown',
    license='MIT',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Topic :: Multimedia :: Graphics',
        'Topic :: Scientific/Engineering :: Information Analysis',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
    keywords='kmeans k-means++ clustering color-quantization palette',
    packages=find_packages(include=['kmeans*', 'quantizer*']),
    python_requires='>=3.9',
    install_requires=[
        'numpy>=1.17',
        'scikit-learn>=0.24',  # silhouette score in kmeans.utils.evaluate_clustering
        'Pillow>=9.1',
    ],
    extras_require={
        'plot': [
            'matplotlib>=3.3',
        ],
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'kmeans-quantize=quantizer.cli:main',
        ],
    },
)
