import os
from setuptools import setup, find_packages

project_dir = os.path.abspath(os.path.dirname(__file__))

with open(os.path.join(project_dir, 'version.txt')) as f:
    version = f.read().rstrip()

with open(os.path.join(project_dir, 'requirements.txt.in')) as f:
    requirements = [
        line.split()[0]
        for line in f
        if line.strip() and not line.startswith('#')
    ]

setup(
    name='appinfoparser',
    version=version,
    description='Extract name, identifier, version, build and icon from Android (.apk) and iOS (.ipa) packages',
    packages=find_packages(),
    license='MPL2',
    install_requires=requirements,
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'extract_app_info = appinfoparser.extract_app_info:main',
        ],
    },
    classifiers=(
        'Development Status :: 3 - Alpha',
        'Programming Language :: Python :: 3',
    ),
)
