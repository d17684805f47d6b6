from setuptools import find_packages, setup

DESCRIPTION = 'Peek into OME-Zarr images in the terminal.'

with open('README.md') as f:
    LONG_DESCRIPTION = f.read()

dependencies = [
    'numpy>=1.26',
    'zarr>=3.0',
    'donfig>=0.8',
    'typer>=0.12',
    'rich>=13',
    'pillow>=10',
]

setup(
    name='zarrpeek',
    version='0.1.0',
    description=DESCRIPTION,
    long_description=LONG_DESCRIPTION,
    long_description_content_type='text/markdown',
    extras_require={
        'test': [
            'pytest',
            'hypothesis',
        ],
    },
    python_requires='>=3.11, <4',
    install_requires=dependencies,
    package_dir={'': 'src'},
    packages=find_packages('src'),
    entry_points={
        'console_scripts': [
            'zarrpeek = zarrpeek._cli.cli:app',
        ],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Environment :: Console',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python',
        'Topic :: Scientific/Engineering :: Image Processing',
        'Operating System :: Unix',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Programming Language :: Python :: 3.13',
    ],
    license='MIT',
)
