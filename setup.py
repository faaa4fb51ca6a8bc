from setuptools import setup, find_packages
setup(
    name="airbnb_explorer",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages("src"),
    include_package_data=True,
    python_requires=">=3.8",
    install_requires=[
        "pydantic>=2",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'airbnb_explorer=airbnb_explorer.__main__:main'
        ]
    }
)
