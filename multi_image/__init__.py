"""Multi-image build configuration on top of `sharekit`."""
