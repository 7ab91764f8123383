from setuptools import setup, find_packages
from os.path import exists

setup(
    name='navdeck',
    version='0.1.0',
    include_package_data=True,
    packages=find_packages(include=['navdeck', 'navdeck.*']),
    python_requires='>=3.8',
    license='http://www.apache.org/licenses/LICENSE-2.0.html',
    description='navigation state for admin consoles: menu, expansion and page tabs',
    long_description=(open('README.rst').read() if exists('README.rst')
                      else ''),
    install_requires=list(open('requirements.txt').read().strip().split('\n')),
    extras_require={
        'test': ['pytest'],
    },
    zip_safe=False

)
