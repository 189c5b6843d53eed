"""ADMS server package.

Organized by feature modules (devices, commands, attendance, iclock) with a
thin Flask controller layer over service/repository layers.
"""
