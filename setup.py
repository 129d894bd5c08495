from setuptools import setup, find_packages

setup(
    name="drg-tools",
    version="1.0.0",
    description="MS-DRG description separation for healthcare machine learning",
    author="DRG Tools Team",
    packages=find_packages(include=["drg_tools", "drg_tools.*"]),
    py_modules=["drg_cli"],
    install_requires=[
        "pandas>=2.0.0",
        "numpy>=1.24.0",
        "pydantic>=2.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0.0"],
    },
    entry_points={
        "console_scripts": [
            "drg-tools=drg_cli:main",
        ],
    },
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Healthcare Industry",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
