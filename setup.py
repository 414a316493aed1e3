from setuptools import find_packages, setup

setup(
    name="actionflow",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=["PyYAML>=6.0", "Jinja2>=3.1", "jsonpath-ng>=1.6"],
    extras_require={"test": ["pytest>=7"]},
    entry_points={"console_scripts": ["actionflow=actionflow.cli:main"]},
)
