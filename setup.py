import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="sqrlid",
    version="0.0.1",
    author="Gianluca Pacchiella",
    author_email="gp@ktln2.org",
    description="SQRL identities for humans",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/gipi/sqrlid",
    packages=setuptools.find_packages(include=['sqrlid', 'sqrlid.*']),
    package_data={
        'sqrlid.blockdef': ['*.json'],
    },
    scripts=[
        'scripts/sqrldump.py',
        'scripts/sqrlconvert.py',
    ],
    python_requires='>=3.9',
    install_requires=[
        'bitstring>=4,<5',
        'pydantic>=2',
    ],
    extras_require={
        'test': ['pytest'],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: GPLv2 License",
        "Operating System :: OS Independent",
    ],
)
