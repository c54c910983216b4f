"""Compute next semantic versions for monorepo packages from conventional commits."""
