"""store/ -- SQLAlchemy Core persistence for BountyBoard entities.

Implements the Protocols in core/repositories.py. Usecases never import this
package; api/main.py wires a store into each usecase at startup.

Layer rule: store/ imports only stdlib + third-party libraries + core/.
It does NOT import from api/ or auth/.
"""
