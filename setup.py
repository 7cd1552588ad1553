import setuptools
import pathlib

from holotools import log, __version__

code_path = pathlib.Path(__file__).parent.resolve()

log.info('Reading the package requirements...')
# Require that all packages in requirements.txt are installed prior to this
with open(code_path / 'requirements.txt') as file:
    requirements = [line.split('#')[0].strip() for line in file]
    requirements = [_ for _ in requirements if len(_) > 0]

long_description = (code_path / 'README.md').read_text(encoding='utf-8')

setuptools.setup(
    name='holotools',
    version=__version__,
    keywords='holography spatial light modulator digital micromirror device optical tweezers',
    packages=setuptools.find_packages(include=['holotools', 'holotools.*']),
    include_package_data=True,
    description=('Hologram synthesis and pattern finalization for spatial light modulators and '
                 'digital micro-mirror devices.'),
    long_description=long_description,
    long_description_content_type='text/markdown',
    classifiers=[
        "Development Status :: 4 - Beta",
        "Topic :: Scientific/Engineering :: Physics",
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
    ],
    python_requires='>=3.8',
    install_requires=requirements,
    extras_require={
        'gpu': ['cupy'],
        'test': ['pytest'],
    },
    zip_safe=False,
)
