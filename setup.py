from setuptools import setup, find_packages

setup(
    name="flipboard",
    version="0.1.0",
    description="Driver for split-character row displays over a serial link",
    author="Garrett Johnson",
    packages=find_packages(include=["flipboard", "flipboard.*"]),
    python_requires=">=3.11",
    install_requires=[
        "pyserial==3.5",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "flipboard=flipboard.main:main",
        ],
    },
    tests_require=['pytest'],
)
