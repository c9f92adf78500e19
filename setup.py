import os
from setuptools import setup

def read(fname):
    return open(os.path.join(os.path.dirname(__file__), fname)).read()

setup(
    name = 'texpreview',
    version = '0.1.0',
    description = 'A command-line tool for checking LaTeX documents for structural problems, and previewing them as HTML.',
    long_description = read('README.md'),
    long_description_content_type = 'text/markdown',
    license = 'MIT',
    keywords = 'latex',
    install_requires=[
        'markdown', 'lxml', 'lxml_html_clean', 'watchdog', 'diskcache', 'platformdirs',
        'latex2mathml'
    ],
    extras_require = {
        'test': ['pytest', 'PyHamcrest', 'cssselect'],
    },
    packages = [
        'texpreview', 'texpreview.lib'
    ],
    entry_points = {
        'console_scripts': ['texpv=texpreview.lib.texpv:main'],
    },
    classifiers = [
        'Development Status :: 3 - Alpha',
        'Environment :: Console',
        'Intended Audience :: Education',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3 :: Only',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Text Processing :: Markup :: LaTeX',
    ]
)
