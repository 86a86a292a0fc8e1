from setuptools import find_packages, setup


setup(
    name="gcsa-locate",
    version="0.0.6",
    description="Locate k-mers in the variation graph using GCSA2.",
    package_dir={"": "backend"},
    packages=find_packages("backend"),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "psutil",
        "fastapi",
        "pydantic",
        "python-multipart",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "gcsa_locate=locator.main:main",
        ],
    },
    zip_safe=False,
)
