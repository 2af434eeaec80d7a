import re
from setuptools import setup, find_packages

NAME = 'molecularmass'
AUTHOR = 'Lars Yunker'

PACKAGES = find_packages(exclude=['validation_files'])
KEYWORDS = ', '.join([
    'molecular mass',
    'molecular weight',
    'chemical formula',
    'periodic table',
])

with open('README.MD') as f:
    long_description = f.read()

# version is read from the package without importing it (the dependencies may not be installed yet)
with open('molecularmass/__init__.py') as f:
    VERSION = re.search(r"^__version__ = '([^']+)'", f.read(), re.M).group(1)

setup(
    name=NAME,
    version=VERSION,
    description='A Python library for calculating the molecular mass of chemical formulas.',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author=AUTHOR,
    packages=PACKAGES,
    package_data={
        'molecularmass': ['data/*.csv'],
    },
    license='MIT',
    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Development Status :: 5 - Production/Stable',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering :: Chemistry',
        'Operating System :: OS Independent',
        'Natural Language :: English'
    ],
    install_requires=[
        'numpy>=1.14.2',
        'openpyxl>=2.5.2',
        'tqdm>=4.19',
    ],
    keywords=KEYWORDS,
)
