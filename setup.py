from setuptools import find_packages, setup

setup(
  name="edcurve",
  version="0.1.0",
  author="Covert Encryption",
  author_email="covert-encryption@users.noreply.github.com",
  description="Twisted Edwards curve arithmetic, point encodings and Elligator",
  long_description=open("README.md").read(),
  long_description_content_type="text/markdown",
  packages=find_packages(exclude=["tests", "tests.*"]),
  python_requires=">=3.9",
  classifiers=[
    "Programming Language :: Python :: 3",
    "License :: OSI Approved :: MIT License",
    "License :: Public Domain",
    "Operating System :: OS Independent",
  ],
  install_requires=[
    "colorama>=0.4",
    "cryptography>=35",
    "tqdm>=4.62",
  ],
  extras_require={
    "test": ["pytest", "pytest-sugar", "pytest-mock", "coverage", "mypy", "bandit", "pynacl>=1.4"],
    "dev": ["tox", "isort", "yapf"],
  },
  entry_points=dict(console_scripts=["edcurve = edcurve.__main__:main"]),
)
