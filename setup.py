from setuptools import setup, find_packages

setup(
    name='frepforge',
    version='0.1.0',
    author='nassimberrada',
    author_email='your.email@example.com',
    description='Implicit-surface CSG modeling with scoped expression lifetimes, meshing and sharp-edge normals.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    url='https://github.com/yourusername/frepforge',
    packages=find_packages(include=['frepforge', 'frepforge.*']),
    include_package_data=True,
    install_requires=[
        'numpy',
        'scikit-image>=0.17',
    ],
    extras_require={
        'test': [
            'pytest>=7',
        ]
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Topic :: Multimedia :: Graphics :: 3D Modeling',
        'Topic :: Scientific/Engineering :: Visualization',
    ],
    python_requires='>=3.8',
)
