"""Application layer: conversion commands and their wiring."""
