from setuptools import setup, find_packages

main_ns = {}
with open("src/human_json/_version.py") as ver_file:
    exec(ver_file.read(), main_ns)


setup(
    name="human-json",
    version=main_ns["__version__"],
    author="human-json contributors",
    description="A JSON formatter that produces diffable, human-readable output",
    license="MIT",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=["wcwidth"],
    extras_require={
        "test": ["pytest", "pytest-console-scripts"],
    },
    entry_points={
        "console_scripts": [
            "human-json=human_json._human_json:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
)
