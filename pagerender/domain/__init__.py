"""Domain layer: conversion entities, value objects and decision services."""
