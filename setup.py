from setuptools import setup, find_packages
import os

# Read the long description from README.md
long_description = ""
if os.path.exists("README.md"):
    with open("README.md", "r", encoding="utf-8") as f:
        long_description = f.read()

setup(
    name="diag-hessian-approx",
    version="0.1.0",
    packages=find_packages("src"),
    package_dir={"": "src"},
    install_requires=[
        "numpy>=1.26.0",
        "scipy>=1.15.0",
        "matplotlib>=3.10.6",
        "torch>=2.8.0",  # autodiff diagnostics and the gpu operators
    ],
    extras_require={
        "dev": ["pytest>=9.0.1", "black", "flake8"],
    },
    description="Diagonal quasi-Newton Hessian approximations as SciPy/torch linear operators",
    long_description=long_description,
    long_description_content_type="text/markdown",
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering :: Mathematics",
    ],
    include_package_data=True,
)
