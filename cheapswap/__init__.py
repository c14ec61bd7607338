"""CheapSwap: cheaper functional substitutes for expensive Magic cards."""
