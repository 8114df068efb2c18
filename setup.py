import setuptools

setuptools.setup(
    name = 'fiberunfold',
    version = '1.0',
    description = 'extract and unfold DNA fibers from multi-channel images',
    packages = setuptools.find_packages(include=['fiberunfold', 'fiberunfold.*']),
    python_requires = '>=3.8',
    install_requires=['numpy', 'scipy>=1.6', 'matplotlib', 'tifffile'],
    extras_require={'test': ['pytest']},
)
