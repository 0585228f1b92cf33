from setuptools import setup, find_packages

setup(
    name='ocautomator',
    version='0.1.0',
    packages=find_packages(exclude=['ocautomator.tests']),
    include_package_data=True,
    install_requires=[
        'typer',
        'python-dotenv',
        'jsonschema',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'ocautomator=ocautomator.cli:app'
        ]
    },
    description='CLI that creates and destroys OpenShift clusters through run-openshift-install.sh and tracks them in a JSON store',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.8',
)
